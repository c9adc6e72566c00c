"""braglog - a year-partitioned brag document fed by manual notes, GitHub and Jira."""

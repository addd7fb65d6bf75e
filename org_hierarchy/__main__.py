from org_hierarchy.cli import app

app(prog_name="org-hierarchy")

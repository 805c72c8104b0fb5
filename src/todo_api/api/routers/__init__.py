"""
todo_api.api.routers

HTTP routers: health, auth, accounts, tasks.
"""

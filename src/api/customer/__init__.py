"""Customer bounded context.

Permission-filtered customer CRUD plus synchronization of the SearchGuard
tenant mapping after every mutation.
"""

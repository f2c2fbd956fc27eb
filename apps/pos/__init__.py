"""
POS checkout app.

Cart, checkout wizard, payment validation and transaction submission for
the till. Products, customers and transactions live on the retail backend.
"""

"""
Sales app: immutable records of completed POS transactions and receipts.
"""

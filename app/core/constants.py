# app/core/constants.py

# largest value an INTEGER primary/foreign key column holds
MAX_DB_ID = 2**31 - 1

"""
Database seeding for the dashboard demo.

- Fixed placeholder dataset
- bcrypt password hashing
- Reset-and-reseed of the users, customers, invoices and revenue tables
"""

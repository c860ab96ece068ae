"""HR payroll package.

Organized by feature modules (employees, attendance, leaves, payroll) with a
thin Flask controller layer on top of service/repository layers.
"""

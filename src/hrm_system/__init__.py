"""HRM System package.

Feature modules (employees, attendance, payroll, tasks, appointments, ...)
each carry a model, a repository Protocol with its MySQL implementation,
a service holding the business rules and a thin Flask controller.
"""

"""HR and payroll service: employees, SIN vault and semi-monthly payroll."""

__version__ = "0.1.0"

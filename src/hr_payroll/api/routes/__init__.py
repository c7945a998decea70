"""API routes."""

from hr_payroll.api.routes.employees import router as employees_router
from hr_payroll.api.routes.employees import sin_router
from hr_payroll.api.routes.employees import users_router
from hr_payroll.api.routes.health import router as health_router
from hr_payroll.api.routes.pay_periods import payrolls_router
from hr_payroll.api.routes.pay_periods import router as pay_periods_router
from hr_payroll.api.routes.timesheets import router as timesheets_router

__all__ = [
    "employees_router",
    "health_router",
    "pay_periods_router",
    "payrolls_router",
    "sin_router",
    "timesheets_router",
    "users_router",
]

"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the application's tabs.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .login_page import LoginPage
from .dashboard_page import DashboardPage
from .customers_page import CustomersPage
from .members_page import MembersPage
from .fees_page import FeesPage
from .completed_page import CompletedPage
from .transactions_page import TransactionsPage
from .beneficiaries_page import BeneficiariesPage
from .health_check_page import HealthCheckPage

__all__ = [
    "LoginPage",
    "DashboardPage",
    "CustomersPage",
    "MembersPage",
    "FeesPage",
    "CompletedPage",
    "TransactionsPage",
    "BeneficiariesPage",
    "HealthCheckPage",
]

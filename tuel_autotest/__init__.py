"""
TUEL UI automation suite.

Packages:
    - common: Logging setup and credential masking
    - ui_testing: Playwright framework, page objects and live UI tests
    - unit: Offline tests for the framework
"""

__version__ = "1.0.0"

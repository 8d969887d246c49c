"""UI testing: framework, page objects and live tests."""

"""csapi - CrowdStrike intelligence and Falcon host API client."""

__version__ = "0.1.0"

"""sdk - shared support code for the kiosk bridge

Contains reusable modules for:
    - logging: structured, hierarchical logging
"""

__version__ = "1.0.0"

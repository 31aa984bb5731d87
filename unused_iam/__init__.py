"""
Identify Unused IAM
Audit IAM roles and customer-managed policies for ones that are no longer used
"""

__version__ = "0.3.0"

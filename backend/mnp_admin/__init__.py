"""Mobile Number Portability Admin - backend package"""

"""Time Tracking package.

Stamp records (check-in/check-out events) with a time accounting service on
top: check-in status, checked-in duration and worked time after breaks. A
thin Flask controller layer sits over the service/repository layers.
"""

"""Mutabaah ledger package.

Monthly activity ledger, locking policy and approval workflows, organized by
feature modules (ledger, requests, submissions, ...) with a thin Flask
controller layer over service/repository layers.
"""

"""
Domain layer -- pure values and rules, no I/O.

Report records, roles and the capability check, amount handling, the
reconciliation rule, report filtering criteria and the store interface.
"""

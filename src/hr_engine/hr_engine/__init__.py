"""HR Engine package.

Attendance, payroll, leave and overtime-compensation rules organised by
feature module, with a thin Flask controller layer over service and
record-store layers.
"""

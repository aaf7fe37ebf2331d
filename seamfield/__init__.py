"""
SeamField - constrained seamless parameterization from directional fields
"""

"""
Core infrastructure module for AGG-PBM.

Shared components used by the aggregation kernel:
- fields: Field conversion and the FieldStore
- utils: Configuration, helpers, result management, evaluation logging
"""

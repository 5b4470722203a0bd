"""Services package - Business logic layer for Recipe Costing.

Architecture:
- Pure engine: unit_converter, quantity_parser and recipe_cost_calculator
  work on the value types in dto and never touch the database
- Services: Stateless functions that load records and call the engine
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy

Service Modules:
- recipe_cost_service: Recipe costing and custom unit conversion management

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured operation logging
"""

"""
Domain Layer

Core models and business logic, split by functional domain:

- common: Result type and shared error codes
- coordinates: geographic and Cartesian coordinate models
- satellite: TLE handling and SGP4 orbit propagation
"""

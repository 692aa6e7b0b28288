"""DANGER ZONE services.

- Policy Service: clearance thresholds and field validation
- Audit Service: append-only security log
- Registry Service: one orchestration path for every registry operation
- REST API and GraphQL API: transport surfaces over the registry
"""

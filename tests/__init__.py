"""
Test suite for telemetry assembly.

- tests/unit: registry, version gate, ledger, document model, resolvers
  and assemblers in isolation
- tests/integration: full documents assembled into working SDK pipelines
  with in-memory exporters and readers

Usage:
    pytest tests/unit
    pytest -m integration
"""

"""
Test suite for the CPF tool

- Unit tests for the checksum engine, batch processor and serialization
- Telemetry tests with a mocked PostHog endpoint
- CLI tests through click's CliRunner
"""

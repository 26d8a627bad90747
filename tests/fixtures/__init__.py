"""Test fixtures for the Foo client.

This package provides reusable test fixtures:
- transports: MockTransport helpers and realistic transport failure shapes
- service: A FastAPI fake of the Foo service behind a load balancer
"""

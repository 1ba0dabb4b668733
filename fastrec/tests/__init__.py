"""
Tests Module: Unit and Integration Tests

Test Coverage:
    - Preference store (build, load, dual-index consistency, errors)
    - Set similarity (strategies, metrics, orientation)
    - Bounded top-N (admission and tie rules, lifecycle)
    - Neighborhoods (top-k, threshold, cached, inverted parallel build)
    - Rerankers (dithering)
    - Config, logging and CLI
"""

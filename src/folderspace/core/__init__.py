"""Scanning core: prober, subtree accumulator, orchestrator and run controller."""

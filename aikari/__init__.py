"""Shared infrastructure: queues, inter-thread messaging, state stores, config files, logging, DoH, hosts file and MQTT packet helpers."""

__version__ = "0.0.1"
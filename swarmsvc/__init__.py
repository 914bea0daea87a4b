"""Swarm service provisioning (swarmsvc).

Small API layer in front of a Docker Swarm manager that:
 - accepts a generic, versioned service description
 - translates it into the engine's native service spec
 - creates / removes the service through the Docker Engine API

Only the translation has real decision logic; the rest is plumbing.
"""

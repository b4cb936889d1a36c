"""Command line interface for the targetd provisioner."""

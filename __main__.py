"""Pulumi entry point for the workshop stack."""

from workshop.infra.program import main

main()

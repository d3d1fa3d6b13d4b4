"""invoke entry point: ``invoke reconcile --dry-run``."""

from invoke import Collection

from photogallery.cli.reconcile import reconcile

ns = Collection(reconcile)

"""Background jobs for Campus Hub."""

from .external_sync import ExternalChangeWatcher, register_sync_job

__all__ = [
	"ExternalChangeWatcher",
	"register_sync_job",
]

"""Reactive entity store: snapshots, subscriptions, projections and mutations."""

"""HTTP interface for BoothCode webhooks."""

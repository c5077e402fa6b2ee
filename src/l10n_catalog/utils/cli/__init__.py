"""Command-line helpers for the l10n-catalog tool."""

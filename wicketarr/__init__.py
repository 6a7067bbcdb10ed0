"""Wicketarr - cricket match feeds for chat communities."""

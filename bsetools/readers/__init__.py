"""Readers for formatted basis set files and lookup of the reader formats."""
"""HTTP host for Whoopie games."""

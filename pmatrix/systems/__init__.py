"""P-MATRIX -- Systems."""

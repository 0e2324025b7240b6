"""Tests for the csapi command line interface."""

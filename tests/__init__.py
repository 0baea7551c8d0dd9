"""Tests for the state scraper."""

"""Test suite for the number portability admin backend"""

"""Extraction, text processing and configuration services"""

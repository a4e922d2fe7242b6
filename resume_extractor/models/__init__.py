"""Configuration, result and upload models"""

"""Walla Walla Wine Tours booking service"""

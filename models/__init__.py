"""Shared data models"""

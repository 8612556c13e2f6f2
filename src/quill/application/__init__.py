"""Application layer - commands and services"""

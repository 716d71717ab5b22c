"""Merkle tree engine and its configuration"""

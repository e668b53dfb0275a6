"""hookstore command line interface"""

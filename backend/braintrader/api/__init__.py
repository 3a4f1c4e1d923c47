"""HTTP and WebSocket API for Braintrader"""

"""
Sensor reader modules.
Each module turns a raw device reading into a temperature in degrees Celsius.
"""

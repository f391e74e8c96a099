"""
Schema provisioning and fixture loading.
"""

"""gh-deploy-keys command line interface"""

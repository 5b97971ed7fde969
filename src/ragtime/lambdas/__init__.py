"""AWS Lambda handlers: document CRUD and the joint document analysis endpoint"""

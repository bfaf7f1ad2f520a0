"""서비스 패키지: 비즈니스 로직 계층.

Service package: Business logic layer.
``BaseService`` holds the entity-agnostic CRUD rules; entity services
compose it and add their own domain rules.
"""

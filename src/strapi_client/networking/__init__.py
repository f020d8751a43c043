"""HTTP core of the Strapi client: config, interceptor chains and client."""

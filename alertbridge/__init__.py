"""Pacote do bridge Alertmanager -> Discord.

Este pacote contém:
- constants: variáveis de ambiente, limites do Discord e tabela de cores
- errors: taxonomia de erros do pipeline
- models: modelos do payload do Alertmanager e da mensagem do Discord
- utils: utilitários de formatação e helpers
- translator: conversão de Notification -> DiscordMessage
- services: integração com serviços externos (Discord)
- controller: criação do Flask app e endpoints
"""
